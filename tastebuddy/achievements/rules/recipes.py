from __future__ import annotations

from tastebuddy.achievements.rules.base import ThresholdRule


class BaseRecipeCountRule(ThresholdRule):
    category = 'RECIPE_COUNT'
    metric = 'recipes_authored'


class FirstRecipe(BaseRecipeCountRule):
    code = 'first_recipe'
    name = 'First Recipe'
    description = 'Share your very first recipe with the community'
    icon = '🍳'
    color = '#10B981'
    threshold = 1


class HomeCook(BaseRecipeCountRule):
    code = 'home_cook'
    name = 'Home Cook'
    description = 'Share 5 delicious recipes'
    icon = '👨‍🍳'
    color = '#10B981'
    threshold = 5


class RecipeMaster(BaseRecipeCountRule):
    code = 'recipe_master'
    name = 'Recipe Master'
    description = 'Share 25 amazing recipes with the community'
    icon = '🏆'
    color = '#F59E0B'
    threshold = 25


class CulinaryLegend(BaseRecipeCountRule):
    code = 'culinary_legend'
    name = 'Culinary Legend'
    description = "Share 100 incredible recipes - you're a true legend!"
    icon = '👑'
    color = '#8B5CF6'
    threshold = 100


class Resourceful(ThresholdRule):
    code = 'resourceful'
    name = 'Resourceful'
    description = 'Use more than 50 unique ingredients across all your recipes'
    category = 'INGREDIENTS_COUNT'
    icon = '🧑‍🍳'
    color = '#8B5CF6'
    metric = 'unique_ingredients'
    threshold = 50
    exclusive = True


RULES = (
    FirstRecipe(),
    HomeCook(),
    RecipeMaster(),
    CulinaryLegend(),
    Resourceful(),
)
