from __future__ import annotations

from tastebuddy.achievements.rules.base import ThresholdRule


class BaseMealCountRule(ThresholdRule):
    category = 'MEAL_COUNT'
    metric = 'meals_logged'


class FirstMeal(BaseMealCountRule):
    code = 'first_meal'
    name = 'First Meal'
    description = 'Post your first meal memory'
    icon = '🍽️'
    color = '#10B981'
    threshold = 1


class MealExplorer(BaseMealCountRule):
    code = 'meal_explorer'
    name = 'Meal Explorer'
    description = 'Share 5 meal memories'
    icon = '🗺️'
    color = '#06B6D4'
    threshold = 5


class MealCurator(BaseMealCountRule):
    code = 'meal_curator'
    name = 'Meal Curator'
    description = 'Document 10 delicious meals'
    icon = '📚'
    color = '#8B5CF6'
    threshold = 10


class MealMaster(BaseMealCountRule):
    code = 'meal_master'
    name = 'Meal Master'
    description = 'Share 25 amazing meal experiences'
    icon = '🥇'
    color = '#F59E0B'
    threshold = 25


class MealLegend(BaseMealCountRule):
    code = 'meal_legend'
    name = 'Meal Legend'
    description = 'Document 50 incredible meals'
    icon = '🏅'
    color = '#EF4444'
    threshold = 50


class BasePhotoCountRule(ThresholdRule):
    category = 'PHOTO_COUNT'
    metric = 'photos_uploaded'


class FirstShot(BasePhotoCountRule):
    code = 'first_shot'
    name = 'First Shot'
    description = 'Upload your first photo'
    icon = '📸'
    color = '#10B981'
    threshold = 1


class Photographer(BasePhotoCountRule):
    code = 'photographer'
    name = 'Photographer'
    description = 'Share 10 beautiful food photos'
    icon = '📷'
    color = '#06B6D4'
    threshold = 10


class VisualStoryteller(BasePhotoCountRule):
    code = 'visual_storyteller'
    name = 'Visual Storyteller'
    description = 'Capture 50 stunning food moments'
    icon = '🎨'
    color = '#10B981'
    threshold = 50


RULES = (
    FirstMeal(),
    MealExplorer(),
    MealCurator(),
    MealMaster(),
    MealLegend(),
    FirstShot(),
    Photographer(),
    VisualStoryteller(),
)
