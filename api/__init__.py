"""
API HTTP de alerta-api.

Esta capa expone endpoints REST sobre el core (alerta_core): base de datos,
geocodificación, WhatsApp, identidad y almacenamiento de imágenes.

La API está diseñada para ser consumida por:
- La app móvil de usuarios
- El panel web de administradores y funcionarios
"""
