"""
Services métier MediCabinet.

Ce module contient les services de calcul et de traitement
qui ne sont pas directement liés aux endpoints API.

Modules disponibles:
- sequence: Séquences nommées atomiques (numérotation des patients)
- scheduling: Créneaux horaires des rendez-vous
- finance: Agrégats financiers (bilan, charges, statistiques)
"""
