"""Rotas HTTP da API: adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (formulário público, upload, admin, health)
- Validação inicial de request (path, query, multipart)
- Delegação para os serviços de app.services
- Tradução de resultados em status HTTP (responses.py)

Estrutura:
- routes/public/: formulário de adesão e página de upload
- routes/admin/: login e back-office (sessão por cookie)
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
