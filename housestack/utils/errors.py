# housestack/utils/errors.py
class UserInputError(RuntimeError):
    """
    Raised for invalid user-provided config (paths, fractions, metric names, grids).
    Should NOT print traceback.
    """


class RecipeNotPreppedError(RuntimeError):
    """bake() / juice() called before prep()."""


class StackingError(RuntimeError):
    """
    Base models cannot be stacked:
    - fewer than 2 models
    - missing holdout predictions
    - inconsistent fold assignment
    """


class ArtifactError(RuntimeError):
    """Run directory does not hold a readable model artifact."""


class PipelineAbort(RuntimeError):
    """Raised by a step to stop the remaining steps of a run."""
