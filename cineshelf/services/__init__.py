"""
Couche services applicatifs (cas d'utilisation).

Les services orchestrent la logique du domaine pour realiser les cas
d'utilisation. Ils dependent des ports (interfaces) de core/, jamais
des implementations concretes de infrastructure/.

Cette couche contient :
- collection/ : Import/export CSV de la collection (validation, regroupement,
  reconciliation transactionnelle, export)
- physical_items.py : Operations manuelles sur les articles et leurs liens
"""
