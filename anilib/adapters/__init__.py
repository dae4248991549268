"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- api/ : Client AniList (httpx + GraphQL), cache et retry
- media/ : Sonde pymediainfo et conversion ffmpeg
- file_system.py : Listage et parcours des dossiers

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""

from anilib.adapters.file_system import FileSystemAdapter

__all__ = ["FileSystemAdapter"]
