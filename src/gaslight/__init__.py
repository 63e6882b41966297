""" Gaslight: an interactive fiction runtime.

Authors write content as declarative instruction trees, the runtime interprets
them against a mutable world (player, NPCs, locations, cards, game clock).
"""
