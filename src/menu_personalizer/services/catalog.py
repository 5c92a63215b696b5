"""Static meal templates used when generated menus are unavailable."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogIngredient:
    """Ingredient with reference portion and per-100 g nutrition."""

    name: str
    grams: float
    category: str
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float = 0.0
    allergens: tuple[str, ...] = ()

    def matches(self, term: str) -> bool:
        """Return True when an excluded term names this ingredient."""
        needle = term.strip().lower()
        if not needle:
            return False
        return needle in self.name.lower() or needle in self.allergens


@dataclass(frozen=True)
class MealTemplate:
    """Reference recipe at its catalog portion size."""

    name: str
    meal_types: frozenset[str]
    tags: frozenset[str]
    prep_time_minutes: int
    cooking_method: str
    instructions: str
    ingredients: tuple[CatalogIngredient, ...]

    @property
    def calories(self) -> float:
        """Calories at the reference portion."""
        return sum(i.calories * i.grams / 100 for i in self.ingredients)

    @property
    def protein_density(self) -> float:
        """Grams of protein per 100 kcal."""
        protein = sum(i.protein * i.grams / 100 for i in self.ingredients)
        return protein / self.calories * 100 if self.calories else 0.0


def _ingredient(  # noqa: PLR0913
    name: str,
    grams: float,
    category: str,
    macros: tuple[float, float, float, float, float],
    allergens: tuple[str, ...] = (),
) -> CatalogIngredient:
    calories, protein, carbs, fat, fiber = macros
    return CatalogIngredient(
        name=name,
        grams=grams,
        category=category,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=fiber,
        allergens=allergens,
    )


# kcal, protein, carbs, fat, fiber per 100 g
_EGGS = (143, 12.6, 0.7, 9.5, 0.0)
_WHOLE_GRAIN_BREAD = (247, 13.0, 41.0, 3.4, 7.0)
_SPINACH = (23, 2.9, 3.6, 0.4, 2.2)
_OATS = (389, 16.9, 66.0, 6.9, 10.6)
_ALMOND_MILK = (17, 0.6, 0.3, 1.4, 0.2)
_GREEK_YOGURT = (73, 10.0, 3.9, 2.0, 0.0)
_BERRIES = (50, 0.7, 12.0, 0.3, 2.4)
_ALMONDS = (579, 21.0, 22.0, 50.0, 12.5)
_CHICKEN = (165, 31.0, 0.0, 3.6, 0.0)
_GREENS = (20, 1.5, 3.5, 0.2, 2.0)
_OLIVE_OIL = (884, 0.0, 0.0, 100.0, 0.0)
_TOMATO = (18, 0.9, 3.9, 0.2, 1.2)
_CUCUMBER = (15, 0.7, 3.6, 0.1, 0.5)
_SALMON = (208, 20.0, 0.0, 13.0, 0.0)
_QUINOA = (120, 4.4, 21.3, 1.9, 2.8)
_BROCCOLI = (34, 2.8, 7.0, 0.4, 2.6)
_BROWN_RICE = (112, 2.3, 23.5, 0.8, 1.8)
_TOFU = (144, 17.0, 3.0, 9.0, 2.0)
_LENTILS = (116, 9.0, 20.0, 0.4, 7.9)
_CHICKPEAS = (164, 8.9, 27.4, 2.6, 7.6)
_PASTA = (149, 5.8, 30.0, 1.7, 3.9)
_TURKEY = (135, 30.0, 0.0, 1.0, 0.0)
_SWEET_POTATO = (86, 1.6, 20.0, 0.1, 3.0)
_LEAN_BEEF = (250, 26.0, 0.0, 15.0, 0.0)
_COTTAGE_CHEESE = (98, 11.0, 3.4, 4.3, 0.0)
_HUMMUS = (166, 7.9, 14.3, 9.6, 6.0)
_PEANUT_BUTTER = (588, 25.0, 20.0, 50.0, 6.0)
_APPLE = (52, 0.3, 14.0, 0.2, 2.4)
_AVOCADO = (160, 2.0, 8.5, 14.7, 6.7)
_TUNA = (116, 26.0, 0.0, 1.0, 0.0)
_CORN_TORTILLA = (218, 5.7, 44.6, 2.9, 6.3)
_BLACK_BEANS = (132, 8.9, 23.7, 0.5, 8.7)
_BELL_PEPPER = (31, 1.0, 6.0, 0.3, 2.1)
_FETA = (264, 14.0, 4.0, 21.0, 0.0)
_WHEY = (400, 80.0, 8.0, 6.0, 0.0)
_BANANA = (89, 1.1, 23.0, 0.3, 2.6)

_NUTS = ("nuts", "tree nuts")
_DAIRY = ("dairy", "milk", "lactose")
_GLUTEN = ("gluten", "wheat")

BREAKFAST = "BREAKFAST"
LUNCH = "LUNCH"
DINNER = "DINNER"
SNACK = "SNACK"

DEFAULT_CATALOG: tuple[MealTemplate, ...] = (
    MealTemplate(
        name="Veggie Scrambled Eggs with Toast",
        meal_types=frozenset({BREAKFAST}),
        tags=frozenset({"vegetarian", "dairy_free", "kosher"}),
        prep_time_minutes=15,
        cooking_method="Pan frying",
        instructions="Scramble the eggs with spinach and serve with toasted bread.",
        ingredients=(
            _ingredient("eggs", 120, "protein", _EGGS, ("egg", "eggs")),
            _ingredient("whole grain bread", 60, "grain", _WHOLE_GRAIN_BREAD, _GLUTEN),
            _ingredient("spinach", 50, "vegetable", _SPINACH),
        ),
    ),
    MealTemplate(
        name="Overnight Oats with Berries",
        meal_types=frozenset({BREAKFAST}),
        tags=frozenset({"vegetarian", "vegan", "dairy_free", "kosher"}),
        prep_time_minutes=5,
        cooking_method="Soaking",
        instructions="Soak oats in almond milk overnight, top with berries and almonds.",
        ingredients=(
            _ingredient("oats", 60, "grain", _OATS, ("gluten",)),
            _ingredient("almond milk", 200, "dairy alternative", _ALMOND_MILK, _NUTS),
            _ingredient("mixed berries", 80, "fruit", _BERRIES),
            _ingredient("almonds", 15, "fat", _ALMONDS, _NUTS),
        ),
    ),
    MealTemplate(
        name="Greek Yogurt Power Bowl",
        meal_types=frozenset({BREAKFAST, SNACK}),
        tags=frozenset({"vegetarian", "gluten_free", "kosher", "high_protein"}),
        prep_time_minutes=5,
        cooking_method="Assembly",
        instructions="Top Greek yogurt with berries and almonds.",
        ingredients=(
            _ingredient("Greek yogurt", 200, "protein", _GREEK_YOGURT, _DAIRY),
            _ingredient("mixed berries", 60, "fruit", _BERRIES),
            _ingredient("almonds", 20, "fat", _ALMONDS, _NUTS),
        ),
    ),
    MealTemplate(
        name="Tofu Scramble Tacos",
        meal_types=frozenset({BREAKFAST, LUNCH}),
        tags=frozenset({"vegetarian", "vegan", "gluten_free", "dairy_free", "kosher"}),
        prep_time_minutes=15,
        cooking_method="Pan frying",
        instructions="Crumble tofu into a hot pan with peppers and spinach, serve in tortillas.",
        ingredients=(
            _ingredient("firm tofu", 150, "protein", _TOFU, ("soy",)),
            _ingredient("spinach", 60, "vegetable", _SPINACH),
            _ingredient("bell pepper", 60, "vegetable", _BELL_PEPPER),
            _ingredient("olive oil", 5, "fat", _OLIVE_OIL),
            _ingredient("corn tortilla", 50, "grain", _CORN_TORTILLA),
        ),
    ),
    MealTemplate(
        name="Spinach and Feta Omelette",
        meal_types=frozenset({BREAKFAST}),
        tags=frozenset(
            {"vegetarian", "gluten_free", "kosher", "high_protein", "low_carb"}
        ),
        prep_time_minutes=10,
        cooking_method="Pan frying",
        instructions="Whisk the eggs, cook with spinach in olive oil and fold in feta.",
        ingredients=(
            _ingredient("eggs", 150, "protein", _EGGS, ("egg", "eggs")),
            _ingredient("spinach", 60, "vegetable", _SPINACH),
            _ingredient("feta cheese", 30, "dairy", _FETA, _DAIRY),
            _ingredient("olive oil", 5, "fat", _OLIVE_OIL),
        ),
    ),
    MealTemplate(
        name="Grilled Chicken Salad",
        meal_types=frozenset({LUNCH}),
        tags=frozenset(
            {"gluten_free", "dairy_free", "kosher", "high_protein", "low_carb"}
        ),
        prep_time_minutes=25,
        cooking_method="Grilling",
        instructions="Grill the chicken and serve over greens with olive oil dressing.",
        ingredients=(
            _ingredient("chicken breast", 150, "protein", _CHICKEN, ("poultry",)),
            _ingredient("mixed greens", 120, "vegetable", _GREENS),
            _ingredient("tomato", 80, "vegetable", _TOMATO),
            _ingredient("olive oil", 15, "fat", _OLIVE_OIL),
        ),
    ),
    MealTemplate(
        name="Lentil and Quinoa Bowl",
        meal_types=frozenset({LUNCH, DINNER}),
        tags=frozenset({"vegetarian", "vegan", "gluten_free", "dairy_free", "kosher"}),
        prep_time_minutes=25,
        cooking_method="Boiling",
        instructions="Cook lentils and quinoa, toss with chopped vegetables and olive oil.",
        ingredients=(
            _ingredient("lentils", 150, "legume", _LENTILS),
            _ingredient("quinoa", 120, "grain", _QUINOA),
            _ingredient("cucumber", 60, "vegetable", _CUCUMBER),
            _ingredient("tomato", 60, "vegetable", _TOMATO),
            _ingredient("olive oil", 10, "fat", _OLIVE_OIL),
        ),
    ),
    MealTemplate(
        name="Tuna Rice Bowl",
        meal_types=frozenset({LUNCH}),
        tags=frozenset({"gluten_free", "dairy_free", "kosher", "high_protein"}),
        prep_time_minutes=10,
        cooking_method="Assembly",
        instructions="Serve tuna over brown rice with cucumber and avocado.",
        ingredients=(
            _ingredient("tuna", 120, "protein", _TUNA, ("fish",)),
            _ingredient("brown rice", 150, "grain", _BROWN_RICE),
            _ingredient("cucumber", 60, "vegetable", _CUCUMBER),
            _ingredient("avocado", 40, "fat", _AVOCADO),
        ),
    ),
    MealTemplate(
        name="Chickpea Hummus Plate",
        meal_types=frozenset({LUNCH}),
        tags=frozenset({"vegetarian", "vegan", "dairy_free", "kosher"}),
        prep_time_minutes=10,
        cooking_method="Assembly",
        instructions="Plate chickpeas and hummus with bread and fresh vegetables.",
        ingredients=(
            _ingredient("chickpeas", 120, "legume", _CHICKPEAS),
            _ingredient("hummus", 60, "legume", _HUMMUS, ("sesame",)),
            _ingredient("whole grain bread", 60, "grain", _WHOLE_GRAIN_BREAD, _GLUTEN),
            _ingredient("cucumber", 80, "vegetable", _CUCUMBER),
            _ingredient("tomato", 80, "vegetable", _TOMATO),
        ),
    ),
    MealTemplate(
        name="Turkey with Roasted Sweet Potato",
        meal_types=frozenset({LUNCH, DINNER}),
        tags=frozenset({"gluten_free", "dairy_free", "kosher", "high_protein"}),
        prep_time_minutes=35,
        cooking_method="Roasting",
        instructions="Roast sweet potato and broccoli, pan-sear the turkey breast.",
        ingredients=(
            _ingredient("turkey breast", 150, "protein", _TURKEY, ("poultry",)),
            _ingredient("sweet potato", 200, "vegetable", _SWEET_POTATO),
            _ingredient("broccoli", 100, "vegetable", _BROCCOLI),
            _ingredient("olive oil", 5, "fat", _OLIVE_OIL),
        ),
    ),
    MealTemplate(
        name="Baked Salmon with Quinoa",
        meal_types=frozenset({DINNER}),
        tags=frozenset({"gluten_free", "dairy_free", "kosher", "high_protein"}),
        prep_time_minutes=30,
        cooking_method="Baking",
        instructions="Bake salmon with herbs and serve with quinoa and steamed broccoli.",
        ingredients=(
            _ingredient("salmon fillet", 150, "protein", _SALMON, ("fish",)),
            _ingredient("quinoa", 150, "grain", _QUINOA),
            _ingredient("broccoli", 120, "vegetable", _BROCCOLI),
        ),
    ),
    MealTemplate(
        name="Whole Wheat Pasta with Lentil Bolognese",
        meal_types=frozenset({DINNER}),
        tags=frozenset({"vegetarian", "vegan", "dairy_free", "kosher"}),
        prep_time_minutes=30,
        cooking_method="Simmering",
        instructions="Simmer lentils in tomato sauce and serve over pasta.",
        ingredients=(
            _ingredient("whole wheat pasta", 200, "grain", _PASTA, _GLUTEN),
            _ingredient("lentils", 100, "legume", _LENTILS),
            _ingredient("tomato", 150, "vegetable", _TOMATO),
            _ingredient("olive oil", 10, "fat", _OLIVE_OIL),
        ),
    ),
    MealTemplate(
        name="Beef and Black Bean Burrito Bowl",
        meal_types=frozenset({DINNER}),
        tags=frozenset({"gluten_free", "dairy_free", "kosher", "high_protein"}),
        prep_time_minutes=30,
        cooking_method="Pan frying",
        instructions="Brown the beef with peppers, serve over rice with beans and avocado.",
        ingredients=(
            _ingredient("lean beef", 120, "protein", _LEAN_BEEF, ("red meat",)),
            _ingredient("black beans", 100, "legume", _BLACK_BEANS),
            _ingredient("brown rice", 120, "grain", _BROWN_RICE),
            _ingredient("bell pepper", 60, "vegetable", _BELL_PEPPER),
            _ingredient("avocado", 40, "fat", _AVOCADO),
        ),
    ),
    MealTemplate(
        name="Tofu Stir-Fry with Brown Rice",
        meal_types=frozenset({DINNER}),
        tags=frozenset({"vegetarian", "vegan", "gluten_free", "dairy_free", "kosher"}),
        prep_time_minutes=20,
        cooking_method="Stir frying",
        instructions="Stir-fry tofu with broccoli and peppers, serve over brown rice.",
        ingredients=(
            _ingredient("firm tofu", 150, "protein", _TOFU, ("soy",)),
            _ingredient("brown rice", 150, "grain", _BROWN_RICE),
            _ingredient("broccoli", 100, "vegetable", _BROCCOLI),
            _ingredient("bell pepper", 80, "vegetable", _BELL_PEPPER),
            _ingredient("olive oil", 10, "fat", _OLIVE_OIL),
        ),
    ),
    MealTemplate(
        name="Greek Salad with Feta and Chickpeas",
        meal_types=frozenset({LUNCH, DINNER}),
        tags=frozenset({"vegetarian", "gluten_free", "kosher"}),
        prep_time_minutes=15,
        cooking_method="Assembly",
        instructions="Toss chickpeas, cucumber and tomato with olive oil, top with feta.",
        ingredients=(
            _ingredient("feta cheese", 60, "dairy", _FETA, _DAIRY),
            _ingredient("chickpeas", 120, "legume", _CHICKPEAS),
            _ingredient("cucumber", 100, "vegetable", _CUCUMBER),
            _ingredient("tomato", 100, "vegetable", _TOMATO),
            _ingredient("olive oil", 10, "fat", _OLIVE_OIL),
        ),
    ),
    MealTemplate(
        name="Herb Chicken with Roasted Broccoli",
        meal_types=frozenset({LUNCH, DINNER}),
        tags=frozenset(
            {"gluten_free", "dairy_free", "kosher", "high_protein", "low_carb"}
        ),
        prep_time_minutes=30,
        cooking_method="Roasting",
        instructions="Roast the chicken and broccoli with olive oil and dried herbs.",
        ingredients=(
            _ingredient("chicken breast", 170, "protein", _CHICKEN, ("poultry",)),
            _ingredient("broccoli", 200, "vegetable", _BROCCOLI),
            _ingredient("bell pepper", 80, "vegetable", _BELL_PEPPER),
            _ingredient("olive oil", 10, "fat", _OLIVE_OIL),
        ),
    ),
    MealTemplate(
        name="Seared Salmon with Avocado Salad",
        meal_types=frozenset({DINNER}),
        tags=frozenset(
            {"gluten_free", "dairy_free", "kosher", "high_protein", "low_carb"}
        ),
        prep_time_minutes=20,
        cooking_method="Pan searing",
        instructions="Sear the salmon and serve with avocado, greens and cucumber.",
        ingredients=(
            _ingredient("salmon fillet", 150, "protein", _SALMON, ("fish",)),
            _ingredient("avocado", 70, "fat", _AVOCADO),
            _ingredient("mixed greens", 80, "vegetable", _GREENS),
            _ingredient("cucumber", 80, "vegetable", _CUCUMBER),
        ),
    ),
    MealTemplate(
        name="Apple with Peanut Butter",
        meal_types=frozenset({SNACK}),
        tags=frozenset({"vegetarian", "vegan", "gluten_free", "dairy_free", "kosher"}),
        prep_time_minutes=2,
        cooking_method="Assembly",
        instructions="Slice the apple and serve with peanut butter.",
        ingredients=(
            _ingredient("apple", 150, "fruit", _APPLE),
            _ingredient("peanut butter", 20, "fat", _PEANUT_BUTTER, ("peanut", "peanuts", "nuts")),
        ),
    ),
    MealTemplate(
        name="Cottage Cheese with Berries",
        meal_types=frozenset({SNACK}),
        tags=frozenset({"vegetarian", "gluten_free", "kosher", "high_protein"}),
        prep_time_minutes=2,
        cooking_method="Assembly",
        instructions="Top cottage cheese with fresh berries.",
        ingredients=(
            _ingredient("cottage cheese", 150, "dairy", _COTTAGE_CHEESE, _DAIRY),
            _ingredient("mixed berries", 80, "fruit", _BERRIES),
        ),
    ),
    MealTemplate(
        name="Protein Smoothie",
        meal_types=frozenset({SNACK}),
        tags=frozenset({"vegetarian", "gluten_free", "kosher", "high_protein"}),
        prep_time_minutes=5,
        cooking_method="Blending",
        instructions="Blend all ingredients until smooth.",
        ingredients=(
            _ingredient("whey protein powder", 30, "protein", _WHEY, _DAIRY),
            _ingredient("banana", 100, "fruit", _BANANA),
            _ingredient("almond milk", 250, "dairy alternative", _ALMOND_MILK, _NUTS),
        ),
    ),
    MealTemplate(
        name="Hummus with Vegetable Sticks",
        meal_types=frozenset({SNACK}),
        tags=frozenset({"vegetarian", "vegan", "gluten_free", "dairy_free", "kosher"}),
        prep_time_minutes=5,
        cooking_method="Assembly",
        instructions="Cut cucumber and pepper into sticks and serve with hummus.",
        ingredients=(
            _ingredient("hummus", 60, "legume", _HUMMUS, ("sesame",)),
            _ingredient("cucumber", 100, "vegetable", _CUCUMBER),
            _ingredient("bell pepper", 100, "vegetable", _BELL_PEPPER),
        ),
    ),
    MealTemplate(
        name="Boiled Eggs with Cucumber",
        meal_types=frozenset({SNACK}),
        tags=frozenset(
            {
                "vegetarian",
                "gluten_free",
                "dairy_free",
                "kosher",
                "high_protein",
                "low_carb",
            }
        ),
        prep_time_minutes=10,
        cooking_method="Boiling",
        instructions="Hard-boil the eggs and serve with sliced cucumber.",
        ingredients=(
            _ingredient("eggs", 100, "protein", _EGGS, ("egg", "eggs")),
            _ingredient("cucumber", 100, "vegetable", _CUCUMBER),
        ),
    ),
)
