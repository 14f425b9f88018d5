"""Game domain services: the basketball game-state engine.

Zone classification, action menus, clocks, stat aggregation and undo live
here as plain Python. HTTP routes and socket handlers import these and
keep transport concerns out of the game mechanics.
"""
