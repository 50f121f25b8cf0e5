"""API: camada de borda HTTP.

Responsabilidades:
- Receber requests da Meta (data-exchange de Flows)
- Validar assinatura e formato do corpo
- Delegar decrypt/dispatch/encrypt para app/
- Traduzir falhas de protocolo em respostas HTTP genéricas
"""
