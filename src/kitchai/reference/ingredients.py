"""
Canonical ingredient table.

Each entry: canonical name -> (category, default unit, confidence, aliases).
Confidence is how sure we are about the category/default unit, used by
unit suggestions; it does not affect name matching.
"""

from kitchai.models import UnitCategory

L = UnitCategory.LIQUID
W = UnitCategory.WEIGHT
C = UnitCategory.COUNT

INGREDIENTS: dict[str, tuple[UnitCategory, str, float, tuple[str, ...]]] = {
    # Liquids
    "olive oil": (L, "ml", 0.9, ("evoo",)),
    "vegetable oil": (L, "ml", 0.9, ("canola oil", "sunflower oil", "cooking oil")),
    "coconut oil": (L, "ml", 0.9, ()),
    "sesame oil": (L, "ml", 0.9, ()),
    "milk": (L, "ml", 0.9, ("whole milk", "skim milk")),
    "water": (L, "ml", 0.9, ()),
    "vinegar": (L, "ml", 0.9, ("white vinegar",)),
    "balsamic vinegar": (L, "ml", 0.9, ()),
    "soy sauce": (L, "ml", 0.9, ("shoyu",)),
    "wine": (L, "ml", 0.9, ("red wine", "white wine")),
    "beer": (L, "ml", 0.9, ()),
    "juice": (L, "ml", 0.9, ()),
    "lemon juice": (L, "ml", 0.9, ()),
    "broth": (L, "ml", 0.9, ("chicken broth", "vegetable broth")),
    "stock": (L, "ml", 0.9, ("chicken stock", "beef stock")),
    "cream": (L, "ml", 0.9, ()),
    "heavy cream": (L, "ml", 0.9, ("whipping cream", "double cream")),
    "yogurt": (L, "ml", 0.8, ("yoghurt", "greek yogurt")),
    "hot sauce": (L, "ml", 0.8, ("sriracha", "tabasco")),
    "worcestershire sauce": (L, "ml", 0.9, ()),
    "fish sauce": (L, "ml", 0.9, ()),
    "vanilla extract": (L, "ml", 0.9, ("vanilla",)),
    "honey": (L, "ml", 0.7, ()),
    "maple syrup": (L, "ml", 0.8, ()),
    # Weight: staples
    "flour": (W, "g", 0.9, ("all-purpose flour", "plain flour", "wheat flour")),
    "sugar": (W, "g", 0.9, ("white sugar", "granulated sugar", "caster sugar")),
    "brown sugar": (W, "g", 0.9, ()),
    "salt": (W, "g", 0.9, ("sea salt", "kosher salt", "table salt")),
    "black pepper": (W, "g", 0.9, ("pepper", "peppercorns")),
    "rice": (W, "g", 0.9, ("white rice", "basmati rice", "jasmine rice")),
    "pasta": (W, "g", 0.9, ("penne", "fusilli", "macaroni")),
    "spaghetti": (W, "g", 0.9, ()),
    "noodles": (W, "g", 0.8, ("egg noodles", "rice noodles")),
    "oats": (W, "g", 0.9, ("rolled oats", "oatmeal")),
    "breadcrumbs": (W, "g", 0.8, ("panko",)),
    "croutons": (W, "g", 0.7, ()),
    "cornstarch": (W, "g", 0.9, ("corn starch", "cornflour")),
    "baking powder": (W, "g", 0.9, ()),
    "baking soda": (W, "g", 0.9, ("bicarbonate of soda",)),
    "yeast": (W, "g", 0.9, ("dry yeast", "instant yeast")),
    "cocoa powder": (W, "g", 0.9, ("cocoa",)),
    "chocolate": (W, "g", 0.8, ("dark chocolate", "chocolate chips")),
    # Weight: dairy
    "butter": (W, "g", 0.9, ()),
    "cheese": (W, "g", 0.8, ()),
    "parmesan cheese": (W, "g", 0.8, ("parmesan", "parmigiano", "parmigiano reggiano")),
    "cheddar cheese": (W, "g", 0.8, ("cheddar",)),
    "mozzarella cheese": (W, "g", 0.8, ("mozzarella",)),
    "feta cheese": (W, "g", 0.8, ("feta",)),
    "cream cheese": (W, "g", 0.8, ()),
    "sour cream": (W, "g", 0.8, ()),
    "ice cream": (W, "g", 0.7, ()),
    # Weight: proteins
    "chicken": (W, "g", 0.8, ("whole chicken",)),
    "chicken breast": (W, "g", 0.8, ("chicken breasts", "chicken breast fillet")),
    "chicken thigh": (W, "g", 0.8, ("chicken thighs",)),
    "beef": (W, "g", 0.8, ("steak",)),
    "ground beef": (W, "g", 0.8, ("minced beef", "beef mince")),
    "pork": (W, "g", 0.8, ("pork loin",)),
    "bacon": (W, "g", 0.8, ()),
    "fish": (W, "g", 0.8, ("white fish", "cod")),
    "salmon": (W, "g", 0.8, ("salmon fillet",)),
    "shrimp": (W, "g", 0.8, ("prawns", "prawn")),
    "tofu": (W, "g", 0.8, ()),
    "chickpeas": (W, "g", 0.8, ("garbanzo beans",)),
    "black beans": (W, "g", 0.8, ()),
    "lentils": (W, "g", 0.8, ()),
    # Weight: sauces
    "tomato sauce": (W, "g", 0.7, ("marinara", "passata")),
    "tomato paste": (W, "g", 0.8, ("tomato puree",)),
    "ketchup": (W, "g", 0.8, ("catsup",)),
    "mustard": (W, "g", 0.8, ("dijon mustard",)),
    "mayonnaise": (W, "g", 0.8, ("mayo",)),
    "oyster sauce": (W, "g", 0.8, ()),
    "hoisin sauce": (W, "g", 0.8, ()),
    "peanut butter": (W, "g", 0.8, ()),
    # Weight: herbs and spices
    "rosemary": (W, "g", 0.9, ()),
    "thyme": (W, "g", 0.9, ()),
    "basil": (W, "g", 0.9, ("basil leaves",)),
    "oregano": (W, "g", 0.9, ()),
    "parsley": (W, "g", 0.9, ("flat-leaf parsley",)),
    "cilantro": (W, "g", 0.9, ("coriander leaves",)),
    "dill": (W, "g", 0.9, ()),
    "sage": (W, "g", 0.9, ()),
    "mint": (W, "g", 0.9, ("mint leaves",)),
    "paprika": (W, "g", 0.9, ()),
    "smoked paprika": (W, "g", 0.9, ()),
    "cumin": (W, "g", 0.9, ("cumin seeds",)),
    "coriander": (W, "g", 0.9, ("coriander seeds",)),
    "turmeric": (W, "g", 0.9, ()),
    "ginger": (W, "g", 0.8, ("ginger root",)),
    "cinnamon": (W, "g", 0.9, ()),
    "nutmeg": (W, "g", 0.9, ()),
    "cloves": (W, "g", 0.8, ()),
    "cardamom": (W, "g", 0.9, ()),
    "bay leaves": (W, "g", 0.8, ("bay leaf",)),
    "chili flakes": (W, "g", 0.8, ("red pepper flakes", "chilli flakes")),
    "garlic powder": (W, "g", 0.9, ()),
    # Weight: produce sold by weight
    "spinach": (W, "g", 0.8, ()),
    "mushrooms": (W, "g", 0.8, ("button mushrooms", "cremini")),
    # Count
    "eggs": (C, "units", 0.9, ("egg",)),
    "apples": (C, "units", 0.9, ()),
    "oranges": (C, "units", 0.9, ()),
    "bananas": (C, "units", 0.9, ()),
    "onions": (C, "units", 0.9, ("yellow onion", "white onion", "red onion")),
    "shallots": (C, "units", 0.8, ()),
    "garlic": (C, "units", 0.8, ("garlic cloves", "garlic clove")),
    "tomatoes": (C, "units", 0.8, ("roma tomatoes", "cherry tomatoes")),
    "potatoes": (C, "units", 0.9, ()),
    "sweet potatoes": (C, "units", 0.9, ()),
    "carrots": (C, "units", 0.8, ()),
    "celery": (C, "units", 0.7, ("celery stalks",)),
    "cucumber": (C, "units", 0.8, ()),
    "zucchini": (C, "units", 0.8, ("courgette",)),
    "bell pepper": (C, "units", 0.8, ("red bell pepper", "green bell pepper", "capsicum")),
    "lemons": (C, "units", 0.9, ()),
    "limes": (C, "units", 0.9, ()),
    "avocado": (C, "units", 0.9, ()),
    "romaine lettuce": (C, "units", 0.7, ("romaine", "cos lettuce")),
    "lettuce": (C, "units", 0.7, ("iceberg lettuce",)),
    "broccoli": (C, "units", 0.7, ()),
    "cauliflower": (C, "units", 0.7, ()),
    "bread": (C, "units", 0.6, ("loaf", "sourdough")),
    "tortillas": (C, "units", 0.8, ("flour tortillas", "corn tortillas")),
}
