"""
Training layer: context, pipeline, engines (pure compute) and steps (orchestration).
"""
