"""
Couche domaine (core).

Contient les entités métier, ports (interfaces abstraites) et erreurs du domaine.
Cette couche n'a AUCUNE dépendance vers l'infrastructure (adapters, frameworks, BDD).

Sous-packages :
- entities/ : Entités métier (Anime, Episode, Subtitle, WatchDirectory, Setting)
- ports/ : Interfaces abstraites définissant les contrats pour les adaptateurs
"""
