"""
pygame adapters: renderer, HUD, audio, input and preferences.
"""
