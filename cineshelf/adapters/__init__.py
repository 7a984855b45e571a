"""
Adaptateurs de Cineshelf.

- csv/ : Codec CSV (lecture et ecriture du format d'echange)
- cli/ : Interface en ligne de commande (Typer + Rich)
"""
