"""
Gameplay core: caravan, terrain, obstacles and the game state machine.
NO UI DEPENDENCIES.
"""
