# housestack/training/steps/recipe_prep_step.py
from __future__ import annotations

from housestack import logs
from housestack.pipeline.step import PipelineStep
from housestack.recipe import Recipe
from housestack.training.context import TrainingContext
from housestack.utils.errors import PipelineAbort


class RecipePrepStep(PipelineStep):
    """
    RecipePrepStep（FINAL）

    Contract:
    - prep on ctx.train_df ONLY
    - produces ctx.recipe, ctx.train_X / train_y (juice), ctx.test_X / test_y (bake)
    """

    stage = "recipe_prep"

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if ctx.train_df is None:
            raise PipelineAbort("no training data to prep the recipe on")

        outcome = ctx.cfg.data.outcome
        recipe = Recipe.from_config(ctx.cfg.recipe, outcome=outcome)

        with self.timed():
            with self.inst.timer("recipe_prep"):
                recipe.prep(ctx.train_df)

            ctx.train_X, ctx.train_y = recipe.split_xy(recipe.juice())

            if ctx.test_df is not None and len(ctx.test_df):
                with self.inst.timer("recipe_bake_test"):
                    ctx.test_X, ctx.test_y = recipe.split_xy(recipe.bake(ctx.test_df))

        ctx.recipe = recipe
        logs.info(
            f"[RecipePrepStep] predictors={ctx.train_X.shape[1]} "
            f"train_rows={len(ctx.train_X)}"
        )
        return ctx
