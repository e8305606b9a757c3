from __future__ import annotations

from tastebuddy.achievements.rules.base import ThresholdRule


class BaseFollowersRule(ThresholdRule):
    category = 'FOLLOWERS_COUNT'
    metric = 'followers_count'


class SocialButterfly(BaseFollowersRule):
    code = 'social_butterfly'
    name = 'Social Butterfly'
    description = 'Gain 10 followers who love your recipes'
    icon = '🦋'
    color = '#06B6D4'
    threshold = 10


class Influencer(BaseFollowersRule):
    code = 'influencer'
    name = 'Influencer'
    description = "Gain 100 followers - you're becoming an influencer!"
    icon = '📢'
    color = '#8B5CF6'
    threshold = 100


class CelebrityChef(BaseFollowersRule):
    code = 'celebrity_chef'
    name = 'Celebrity Chef'
    description = "Gain 500 followers - you're a celebrity in the kitchen!"
    icon = '⭐'
    color = '#F59E0B'
    threshold = 500


class Tastemaker(ThresholdRule):
    code = 'tastemaker'
    name = 'Tastemaker'
    description = 'Follow 10 cooks whose recipes inspire you'
    category = 'FOLLOWING_COUNT'
    icon = '🧭'
    color = '#06B6D4'
    metric = 'following_count'
    threshold = 10


class BFF(ThresholdRule):
    code = 'bff'
    name = 'BFF'
    description = 'Become TasteBuddies with someone (mutual following)'
    category = 'SPECIAL'
    icon = '👯'
    color = '#EC4899'
    metric = 'mutual_follows_count'
    threshold = 1


class Appreciated(ThresholdRule):
    code = 'appreciated'
    name = 'Appreciated'
    description = 'Receive 5 compliments from the community'
    category = 'COMPLIMENTS_COUNT'
    icon = '🎁'
    color = '#EC4899'
    metric = 'compliments_received'
    threshold = 5


RULES = (
    SocialButterfly(),
    Influencer(),
    CelebrityChef(),
    Tastemaker(),
    BFF(),
    Appreciated(),
)
