"""Domain layer for the Crediario identity core.

Contains entities, validation, notifications and domain events.
This layer has no dependencies on infrastructure concerns.
"""
