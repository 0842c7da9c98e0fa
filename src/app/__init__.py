"""App: coração do sistema: orquestração e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: modelos persistidos e validação de formulários
- services/: ciclo de vida da proposta, CRM, notificações, campanhas
- infra/: implementações concretas de IO (Firestore, GCS, HTTP, imagens)
- protocols/: contratos/interfaces
- observability/: correlation_id para logs estruturados
- data/: tabelas de referência (códigos IBGE)

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
