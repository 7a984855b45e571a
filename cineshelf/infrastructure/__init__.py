"""
Couche infrastructure de Cineshelf.

Contient les implementations concretes des ports de persistance (SQLModel).
"""
