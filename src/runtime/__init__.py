# path: src/runtime/__init__.py

"""
Runtime glue for the NPC scheduler.

Holds supervisor-side helpers around one scheduler step, such as
safe_step_with_logging().
"""
