"""
Couche domaine de Cineshelf.

Contient les entites (article physique, media, lien), les objets valeur
(formats physiques) et les ports (interfaces de persistance).
Cette couche ne depend d'aucune implementation concrete.
"""
