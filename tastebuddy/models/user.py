from typing import Any, Optional, cast

from tastebuddy.database.db_manager import DBManager
from tastebuddy.models.base import BaseModel
from tastebuddy.utils.constants import (
    FAVORITES_CATEGORY_NAME,
    FIVE_STAR_MIN_AVERAGE,
    FIVE_STAR_MIN_RATINGS,
    QUALITY_MIN_AVERAGE,
    QUALITY_MIN_RATINGS,
)

# Every count the achievement catalog reads, in one round trip. The activity
# tables belong to the application and use its quoted camelCase columns. The
# LATERAL join aggregates ratings per recipe once for both quality metrics.
ACTIVITY_METRICS_SQL = '''
SELECT
    u.id AS user_id,
    COALESCE(LOWER(u.email) = LOWER(%(owner_email)s::text), FALSE) AS is_site_owner,
    (SELECT COUNT(*) FROM recipes r WHERE r."authorId" = u.id) AS recipes_authored,
    (SELECT COUNT(*) FROM follows f WHERE f."followingId" = u.id) AS followers_count,
    (SELECT COUNT(*) FROM follows f WHERE f."followerId" = u.id) AS following_count,
    (
        SELECT COUNT(*)
        FROM follows f
        JOIN follows back
          ON back."followerId" = f."followingId"
         AND back."followingId" = f."followerId"
        WHERE f."followerId" = u.id
    ) AS mutual_follows_count,
    (
        SELECT COUNT(*)
        FROM ratings rt
        JOIN recipes r ON r.id = rt."recipeId"
        WHERE r."authorId" = u.id
    ) AS ratings_received,
    (SELECT COUNT(*) FROM ratings rt WHERE rt."userId" = u.id) AS ratings_given,
    (SELECT COUNT(*) FROM comments c WHERE c."userId" = u.id) AS comments_posted,
    (
        SELECT COUNT(*)
        FROM comments c
        JOIN recipes r ON r.id = c."recipeId"
        WHERE r."authorId" = u.id
    ) AS comments_received,
    (
        SELECT MAX(per_recipe.cnt)
        FROM (
            SELECT COUNT(*) AS cnt
            FROM comments c
            JOIN recipes r ON r.id = c."recipeId"
            WHERE r."authorId" = u.id
            GROUP BY c."recipeId"
        ) per_recipe
    ) AS max_comments_on_recipe,
    (SELECT COUNT(*) FROM meals m WHERE m."authorId" = u.id) AS meals_logged,
    (
        (
            SELECT COUNT(*)
            FROM recipe_images ri
            JOIN recipes r ON r.id = ri."recipeId"
            WHERE r."authorId" = u.id
        ) + (
            SELECT COUNT(*)
            FROM meal_images mi
            JOIN meals m ON m.id = mi."mealId"
            WHERE m."authorId" = u.id
        )
    ) AS photos_uploaded,
    (
        SELECT COUNT(*)
        FROM recipe_book_entries e
        JOIN recipe_book_categories cat
          ON cat.id = e."categoryId" AND cat.name = %(favorites_category)s
        JOIN recipes r ON r.id = e."recipeId"
        WHERE r."authorId" = u.id
    ) AS favorites_received,
    (SELECT COUNT(*) FROM compliments cp WHERE cp."toUserId" = u.id)
        AS compliments_received,
    (
        SELECT COUNT(DISTINCT LOWER(TRIM(ie.ingredient)))
        FROM ingredient_entries ie
        JOIN recipes r ON r.id = ie."recipeId"
        WHERE r."authorId" = u.id
    ) AS unique_ingredients,
    rated.five_star_recipes,
    rated.quality_recipes
FROM users u
LEFT JOIN LATERAL (
    SELECT
        COUNT(*) FILTER (
            WHERE per.n >= %(five_star_min_ratings)s
              AND per.avg_rating >= %(five_star_min_average)s
        ) AS five_star_recipes,
        COUNT(*) FILTER (
            WHERE per.n >= %(quality_min_ratings)s
              AND per.avg_rating >= %(quality_min_average)s
        ) AS quality_recipes
    FROM (
        SELECT COUNT(*) AS n, AVG(rt.rating) AS avg_rating
        FROM ratings rt
        JOIN recipes r ON r.id = rt."recipeId"
        WHERE r."authorId" = u.id
        GROUP BY rt."recipeId"
    ) per
) rated ON TRUE
WHERE u.id = %(user_id)s
'''


class User(BaseModel):
    table = 'users'
    pk = 'id'

    @classmethod
    def activity_metrics(
        cls, user_id: str, owner_email: Optional[str] = None
    ) -> Optional[dict[str, Any]]:
        '''Return the raw activity counts for a user, or None if unknown.'''
        with DBManager() as db:
            row = db.fetchone(
                ACTIVITY_METRICS_SQL,
                {
                    'user_id': user_id,
                    'owner_email': owner_email,
                    'favorites_category': FAVORITES_CATEGORY_NAME,
                    'five_star_min_ratings': FIVE_STAR_MIN_RATINGS,
                    'five_star_min_average': FIVE_STAR_MIN_AVERAGE,
                    'quality_min_ratings': QUALITY_MIN_RATINGS,
                    'quality_min_average': QUALITY_MIN_AVERAGE,
                },
            )
        return cast(Optional[dict[str, Any]], row)
