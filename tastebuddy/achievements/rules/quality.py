from __future__ import annotations

from tastebuddy.achievements.rules.base import ThresholdRule


class BaseFavoritesRule(ThresholdRule):
    category = 'FAVORITES_COUNT'
    metric = 'favorites_received'


class CommunityFavorite(BaseFavoritesRule):
    code = 'community_favorite'
    name = 'Community Favorite'
    description = 'Receive 50 total favorites on your recipes'
    icon = '❤️'
    color = '#EF4444'
    threshold = 50


class BelovedChef(BaseFavoritesRule):
    code = 'beloved_chef'
    name = 'Beloved Chef'
    description = "Receive 200 total favorites - you're beloved by the community!"
    icon = '💖'
    color = '#EC4899'
    threshold = 200


class RecipeSuperstar(BaseFavoritesRule):
    code = 'recipe_superstar'
    name = 'Recipe Superstar'
    description = "Receive 1000 total favorites - you're a true superstar!"
    icon = '🌟'
    color = '#F59E0B'
    threshold = 1000


# Rating averages are aggregated per recipe by the metric query, see
# FIVE_STAR_* and QUALITY_* in utils.constants.
class FiveStarChef(ThresholdRule):
    code = 'five_star_chef'
    name = '5-Star Chef'
    description = 'Have a recipe with 4.5+ average rating'
    category = 'RATINGS_COUNT'
    icon = '⭐'
    color = '#F59E0B'
    metric = 'five_star_recipes'
    threshold = 1


class ConsistentQuality(ThresholdRule):
    code = 'consistent_quality'
    name = 'Consistent Quality'
    description = 'Have 10 recipes with 4+ average rating'
    category = 'RATINGS_COUNT'
    icon = '🎯'
    color = '#10B981'
    metric = 'quality_recipes'
    threshold = 10


class Critic(ThresholdRule):
    code = 'critic'
    name = 'Critic'
    description = 'Rate 10 recipes from other cooks'
    category = 'RATINGS_GIVEN'
    icon = '📝'
    color = '#06B6D4'
    metric = 'ratings_given'
    threshold = 10


class HotTopic(ThresholdRule):
    code = 'hot_topic'
    name = 'Hot Topic'
    description = 'Have a recipe with more than 10 comments'
    category = 'COMMENTS_COUNT'
    icon = '🌶️'
    color = '#EF4444'
    metric = 'max_comments_on_recipe'
    threshold = 10
    exclusive = True


class Conversationalist(ThresholdRule):
    code = 'conversationalist'
    name = 'Conversationalist'
    description = 'Post 25 comments on recipes'
    category = 'COMMENTS_COUNT'
    icon = '💬'
    color = '#06B6D4'
    metric = 'comments_posted'
    threshold = 25


RULES = (
    CommunityFavorite(),
    BelovedChef(),
    RecipeSuperstar(),
    FiveStarChef(),
    ConsistentQuality(),
    Critic(),
    HotTopic(),
    Conversationalist(),
)
