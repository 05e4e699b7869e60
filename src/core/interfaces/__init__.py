"""Interfaces/abstracciones del Core.

Por qué:
- Define el contrato (Protocol) de la API biométrica que implementa el
  dispatcher HTTP.
- Permite invertir dependencias: quien consume el cliente depende del contrato.
"""
