"""
Games module - Example rulesets written as turn routines.

These are ordinary application code on top of the session core:
- roshambo: two-player rock-paper-scissors, plus a countdown variant
- tictactoe: a turn loop that re-prompts on occupied tiles
"""
