"""Modelos y tipos del dominio.

Por qué:
- Aquí viven las estructuras de datos puras (credenciales, requests,
  centinela de respuesta y extractores).
- El dominio no conoce HTTP ni CLI: solo conceptos del protocolo REST.
"""
