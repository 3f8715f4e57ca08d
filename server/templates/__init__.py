"""
Templates Module
================
"""
