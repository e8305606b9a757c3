ACHIEVEMENT_NOTIFICATION_TYPE = 'ACHIEVEMENT_EARNED'
ACHIEVEMENT_NOTIFICATION_TITLE = 'Achievement Unlocked!'

DEFAULT_POOL_MIN_SIZE = 1
DEFAULT_POOL_MAX_SIZE = 10

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_QUEUE_SIZE = 1000

# Quality thresholds used by the rating-based metrics
FIVE_STAR_MIN_RATINGS = 3
FIVE_STAR_MIN_AVERAGE = 4.5
QUALITY_MIN_RATINGS = 2
QUALITY_MIN_AVERAGE = 4.0

# Recipe book category whose entries count as favorites of the recipe's author
FAVORITES_CATEGORY_NAME = 'Favorites'
