"""
stablex — минимальная торговая площадка со штрафами за ордера.

Пакеты:
- stablex.core: доменные модели, формулы штрафа, JSON контракты
- stablex.engine: движок штрафов и таксономия ошибок
- stablex.ledger: часы, хранилище счетов и сервис площадки
"""

__version__ = "0.1.0"
