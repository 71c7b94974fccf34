"""
Cards
=====

Example card factories and their preview registrations.
"""
