"""API: camada HTTP do serviço de adesão.

Responsabilidades:
- Expor endpoints públicos (formulário, página de upload)
- Proteger endpoints administrativos com sessão
- Traduzir resultados de serviço em status HTTP

Subpastas:
- routes/: endpoints por área (health, public, admin)

NÃO PODE conter: regras de negócio, acesso direto a Firestore/Storage.
"""
