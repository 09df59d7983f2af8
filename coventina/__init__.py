"""Game logic for a block-world coin and ring collecting arcade game.

Holds the world grid, the player, model data and the game session; it does
no drawing, input handling or audio of its own.
"""

__version__ = "0.1.0"