"""App: orquestração, serviços e infraestrutura do webhook.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- services/: dispatcher de ações, telas do Flow, decrypt de mídia
- infra/: criptografia, download de mídia, stores
- protocols/: contratos/interfaces
- observability/: correlation_id para logs estruturados
"""
