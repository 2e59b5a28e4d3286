"""Prompt templates for recipe and dish-image generation (rioplatense Spanish)."""

SYSTEM_PROMPT = (
    "Sos un asistente culinario experto. Generá recetas en español rioplatense (Argentina), "
    "utilizando vocabulario local correcto (ej: heladera, bife, morrón, manteca, crema). "
    "El tono debe ser profesional, formal y elegante. Mantené el voseo gramatical propio de "
    "Argentina pero evitá terminantemente el uso de lunfardo, muletillas informales "
    "(como 'che', 'viste') o expresiones coloquiales excesivas. Priorizá la claridad expositiva "
    "y la buena redacción. Asegurate de escribir los títulos con la capitalización correcta "
    "del español (Sentence case). Respondé únicamente con JSON válido, sin texto adicional."
)

STRICT_STRATEGY = (
    "MODO DESAFÍO ACTIVADO: El usuario requiere utilizar ABSOLUTAMENTE TODOS los ingredientes "
    "listados en la receta. Es un ejercicio de creatividad culinaria. Solo podés omitir "
    "ingredientes si son condimentos obvios que no combinan. Buscá la forma de integrar todo."
)

FLEXIBLE_STRATEGY = (
    "MODO FLEXIBLE: Utilizá los ingredientes listados como inspiración principal. Tu prioridad "
    "es que el plato sea delicioso y coherente. Si algún ingrediente no combina bien con el "
    "resto, omitilo sin problemas. Priorizá el sabor sobre la cantidad de ingredientes usados."
)

DIET_RESTRICTIONS = {
    "vegetarian": "La receta debe ser VEGETARIANA: sin carnes, aves, pescados ni mariscos.",
    "vegan": "La receta debe ser VEGANA: sin ningún producto de origen animal (incluye lácteos, huevos y miel).",
    "gluten_free": "La receta debe ser SIN TACC (apta celíacos): sin trigo, avena, cebada ni centeno.",
}

JSON_CONTRACT = """Devolvé un único objeto JSON con esta forma exacta:
{
  "title": "Nombre de la receta (solo primera letra mayúscula)",
  "description": "Breve descripción apetitosa y formal (máx. 20 palabras)",
  "preparationTime": "Tiempo estimado (ej. 30 min)",
  "difficulty": "Fácil, Media o Difícil",
  "calories": 0,
  "ingredientsNeeded": ["Lista completa de ingredientes con medidas estimadas"],
  "missingIngredients": ["Ingredientes clave que el usuario no mencionó"],
  "instructions": ["Pasos de preparación, redactados formalmente"]%(macros)s
}"""

MACROS_FIELD = ',\n  "macros": {"protein": 0, "carbs": 0, "fat": 0}'

IMAGE_PROMPT = (
    "Fotografía gastronómica profesional, realista y muy apetitosa de un plato de {title}. "
    "Iluminación de estudio, alta resolución, estilo revista de cocina, 4k. IMPORTANTE: Imagen "
    "limpia, SIN TEXTO, sin letras, sin tipografía, sin marcas de agua sobre la imagen. Solo comida."
)


def build_recipe_prompt(
    ingredients: list[str],
    use_strict_matching: bool,
    exclude_recipes: list[str] | None = None,
    diet_filters: list[str] | None = None,
    include_macros: bool = False,
) -> str:
    """Assemble the user prompt for one recipe suggestion."""
    sections = [
        "Actuá como un chef profesional. Tengo los siguientes ingredientes disponibles en mi cocina:",
        f"Lista de ingredientes: {', '.join(ingredients)}",
        STRICT_STRATEGY if use_strict_matching else FLEXIBLE_STRATEGY,
    ]

    if exclude_recipes:
        sections.append(
            "IMPORTANTE: El usuario ya vio las siguientes recetas, así que POR FAVOR GENERÁ UNA "
            f"OPCIÓN COMPLETAMENTE DISTINTA a estas: {', '.join(exclude_recipes)}. "
            "Buscá variedad en métodos de cocción o perfiles de sabor."
        )

    for diet in diet_filters or []:
        if diet in DIET_RESTRICTIONS:
            sections.append(DIET_RESTRICTIONS[diet])

    sections.append(
        "Por favor, sugerime 1 receta realizable y bien equilibrada. Si faltan ingredientes "
        "básicos de alacena (como sal, aceite, especias comunes), asumí que los tengo. Si falta "
        "algún ingrediente específico y clave para la receta, listalo en 'missingIngredients'."
    )
    sections.append(
        "Redactá las instrucciones de manera clara, paso a paso y en español rioplatense "
        "(Argentina). El tono debe ser formal y educado. Los títulos deben respetar la "
        'ortografía del español: "Milanesas a la napolitana con puré" (correcto), '
        '"Milanesas A La Napolitana Con Puré" (incorrecto).'
    )
    if include_macros:
        sections.append("Incluí los macronutrientes estimados por porción, en gramos, en 'macros'.")
    sections.append(JSON_CONTRACT % {"macros": MACROS_FIELD if include_macros else ""})

    return "\n\n".join(sections)


def build_image_prompt(title: str) -> str:
    return IMAGE_PROMPT.format(title=title)
