"""
Personal finance tracker API.
"""
