"""
Authentication microservice for Neoflix.

This module provides authentication services:
- User registration and login
- Password hashing
- JWT token signing and verification
"""
