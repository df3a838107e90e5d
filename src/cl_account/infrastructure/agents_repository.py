"""AgentRepository — raw SQL access to the agents (account holders) table."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_account.domain.models import Agent

_AGENT_COLUMNS = """
    g.id, g.name, g.commission_bps, g.flat_commission, g.created_at, g.updated_at,
    (SELECT COUNT(*) FROM accounts a WHERE a.agent_id = g.id) AS account_count
"""

_GET_AGENT_SQL = text(f"SELECT {_AGENT_COLUMNS} FROM agents g WHERE g.id = :agent_id")

# Busiest account holders first, matching the admin dropdown ordering
_LIST_AGENTS_SQL = text(f"""
    SELECT {_AGENT_COLUMNS}
    FROM agents g
    ORDER BY account_count DESC, g.name ASC
""")

_INSERT_AGENT_SQL = text("""
    INSERT INTO agents (name, commission_bps, flat_commission)
    VALUES (:name, :commission_bps, :flat_commission)
    RETURNING id
""")

_UPDATE_AGENT_SQL = text("""
    UPDATE agents
    SET name = :name,
        commission_bps = :commission_bps,
        flat_commission = :flat_commission,
        updated_at = NOW()
    WHERE id = :agent_id
    RETURNING id
""")

_DELETE_AGENT_SQL = text("DELETE FROM agents WHERE id = :agent_id RETURNING id")


def _row_to_agent(row: object) -> Agent:
    return Agent(
        id=str(row.id),  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        commission_bps=row.commission_bps,  # type: ignore[attr-defined]
        flat_commission=row.flat_commission,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
        account_count=row.account_count,  # type: ignore[attr-defined]
    )


class AgentRepository:
    async def get_agent(self, db: AsyncSession, agent_id: str) -> Agent | None:
        result = await db.execute(_GET_AGENT_SQL, {"agent_id": agent_id})
        row = result.fetchone()
        return _row_to_agent(row) if row else None

    async def list_agents(self, db: AsyncSession) -> list[Agent]:
        result = await db.execute(_LIST_AGENTS_SQL)
        return [_row_to_agent(row) for row in result.fetchall()]

    async def create_agent(
        self, db: AsyncSession, name: str, commission_bps: int, flat_commission: int
    ) -> Agent:
        result = await db.execute(
            _INSERT_AGENT_SQL,
            {
                "name": name,
                "commission_bps": commission_bps,
                "flat_commission": flat_commission,
            },
        )
        agent_id = str(result.scalar_one())
        agent = await self.get_agent(db, agent_id)
        assert agent is not None, f"agent {agent_id} vanished after insert"
        return agent

    async def update_agent(self, db: AsyncSession, agent: Agent) -> Agent | None:
        result = await db.execute(
            _UPDATE_AGENT_SQL,
            {
                "agent_id": agent.id,
                "name": agent.name,
                "commission_bps": agent.commission_bps,
                "flat_commission": agent.flat_commission,
            },
        )
        if result.fetchone() is None:
            return None
        return await self.get_agent(db, agent.id)

    async def delete_agent(self, db: AsyncSession, agent_id: str) -> bool:
        result = await db.execute(_DELETE_AGENT_SQL, {"agent_id": agent_id})
        return result.fetchone() is not None
