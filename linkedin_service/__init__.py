"""
Mini LinkedIn - professional networking REST API
"""
