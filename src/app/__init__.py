"""App: agenda clínica e camada de sincronização otimista.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: entidades imutáveis (janelas, agendamentos, cadastros)
- services/: regras de agenda e coordenação de mutações
- infra/: EntityStore, gateways remotos e cache de identidade
- protocols/: contratos/interfaces
- sessions/: ClinicSession, raiz do grafo de objetos
- observability/: correlation_id para logs estruturados

Padrão: app executa; fsm governa status; utils apoia.
"""
