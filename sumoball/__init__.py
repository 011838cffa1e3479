"""
Sumoball Package
================

Sumo rock-paper-scissors: two combatants play weighted rock-paper-scissors,
the loser of each round is pushed one column toward their wall, a wall
knockout ends a match, and a best-of-N series of matches decides the winner.

- sumo_core: board, combatants, move sampling and the match engine
- evaluation: headless batch simulation of whole series

Tunable parameters live in match_config.yaml.
"""
