"""
Keyword based category suggestion for product names.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from shoplist.config import settings
from shoplist.models.category import Category
from shoplist.services.normalization import normalize

logger = logging.getLogger(__name__)

# Ordered: the first matching rule wins, so "salmão" lands in
# "Carnes e Peixes" before "Mercearia" gets a chance to match "sal".
CATEGORY_RULES: List[Tuple[str, Tuple[str, ...]]] = [
    ("Frutas e Verduras", (
        "fruta", "verdura", "legume", "banana", "maçã", "tomate", "alface",
        "cebola", "batata", "laranja", "cenoura", "abobrinha", "brócolis",
    )),
    ("Carnes e Peixes", (
        "carne", "frango", "peixe", "linguiça", "bisteca", "salmão", "ovos", "ovo",
    )),
    ("Laticínios", ("leite", "queijo", "iogurte", "requeijão", "manteiga", "creme")),
    ("Padaria", ("pão", "baguete")),
    ("Bebidas", ("água", "refrigerante", "suco", "cerveja", "café", "bebida")),
    ("Limpeza", ("detergente", "sabão", "sanitária", "desinfetante", "esponja", "limpeza")),
    ("Higiene", (
        "papel higiênico", "sabonete", "creme dental", "shampoo", "desodorante", "higiene",
    )),
    ("Congelados", ("congelado", "congelada")),
    ("Enlatados", ("conserva", "lata", "atum", "molho")),
    ("Cereais e Grãos", ("arroz", "feijão", "açúcar", "farinha", "macarrão", "cereal")),
    ("Mercearia", ("óleo", "sal", "vinagre", "azeite", "maionese")),
    ("Pet Shop", ("ração", "pet", "cão", "gato", "cachorro")),
]

Rules = Sequence[Tuple[str, Iterable[str]]]


def _find_category(categories: Sequence[Category], name: str) -> Optional[Category]:
    key = normalize(name)
    for category in categories:
        if normalize(category.name) == key:
            return category
    return None


def match_rule(name: str, rules: Rules = CATEGORY_RULES) -> Optional[str]:
    """Return the name of the first rule with a keyword contained in `name`."""
    key = normalize(name)
    if not key:
        return None
    for category_name, keywords in rules:
        if any(normalize(kw) in key for kw in keywords):
            return category_name
    return None


def classify(
    name: str,
    rules: Rules = CATEGORY_RULES,
    categories: Sequence[Category] = (),
    default_category: Optional[str] = None,
) -> Optional[int]:
    """
    Map a product name to a category id.

    Rules are tried in declaration order. When nothing matches the default
    category is used; None if that one is missing too. A matched rule whose
    category is not among `categories` also falls back to the default
    rather than yielding None.
    """
    if default_category is None:
        default_category = settings.DEFAULT_CATEGORY_NAME

    rule_name = match_rule(name, rules)
    if rule_name:
        category = _find_category(categories, rule_name)
        if category is not None:
            return category.id
        logger.debug(f"Rule '{rule_name}' matched '{name}' but category is not available")

    fallback = _find_category(categories, default_category)
    return fallback.id if fallback is not None else None


def suggest_category(
    name: str,
    categories: Sequence[Category],
    manual_category_id: Optional[int] = None,
    rules: Rules = CATEGORY_RULES,
) -> Optional[int]:
    """Manual choice wins; the classifier only fills the gap."""
    if manual_category_id is not None:
        return manual_category_id
    return classify(name, rules, categories)
