"""Create historical_candidate_votes table.

Revision ID: 001
Revises:
Create Date: 2026-10-16

Candidate-level election results loaded by the import pipeline. The
forecast reads per-party totals aggregated from this table.
"""

from alembic import op


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Apply migration: create historical_candidate_votes table."""
    op.execute("""
        CREATE TABLE historical_candidate_votes (
            id SERIAL PRIMARY KEY,
            year INTEGER NOT NULL,
            state VARCHAR(2),
            position TEXT,
            party TEXT,
            candidate_name TEXT NOT NULL,
            votes INTEGER NOT NULL DEFAULT 0 CHECK (votes >= 0),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX idx_historical_candidate_votes_year
        ON historical_candidate_votes(year);
        CREATE INDEX idx_historical_candidate_votes_scope
        ON historical_candidate_votes(year, state, position);

        COMMENT ON TABLE historical_candidate_votes IS 'Candidate votes per election year';
        COMMENT ON COLUMN historical_candidate_votes.state IS 'State code, NULL for national totals';
    """)


def downgrade() -> None:
    """Rollback migration: drop historical_candidate_votes table."""
    op.execute("""
        DROP TABLE IF EXISTS historical_candidate_votes CASCADE;
    """)
