"""
Training engines

- engines own ALL numeric semantics (fit, cv, grid, stacking, leaderboard)
- engines never read or write TrainingContext
"""
