"""Authentication and role handling"""
