"""
Instagram Search Service
"""
