"""Modelos y entidades del dominio.

Por qué:
- Aquí viven los DTOs del cable y los descriptores de capacidades (Pydantic v2).
- El dominio no conoce httpx ni la CLI; los registros biométricos son opacos.
"""
