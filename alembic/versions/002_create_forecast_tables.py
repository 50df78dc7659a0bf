"""Create forecast_runs, forecast_results and forecast_swing_regions.

Revision ID: 002
Revises: 001
Create Date: 2026-10-16

A run is created pending and moves to running, then completed or failed.
Results and swing regions are written once per completed run.
"""

from alembic import op


revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Apply migration: create forecast tables."""
    op.execute("""
        -- 1. forecast_runs
        CREATE TABLE forecast_runs (
            id SERIAL PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT,
            target_year INTEGER NOT NULL,
            target_election_type TEXT,
            target_position TEXT,
            target_state TEXT,
            historical_years_used JSONB DEFAULT '[]'::jsonb,
            model_parameters JSONB,
            narrative TEXT,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'running', 'completed', 'failed')),
            started_at TIMESTAMP,
            completed_at TIMESTAMP,
            total_simulations INTEGER DEFAULT 0,
            created_by VARCHAR,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        CREATE INDEX forecast_runs_target_year_idx ON forecast_runs(target_year);
        CREATE INDEX forecast_runs_status_idx ON forecast_runs(status);
        CREATE INDEX forecast_runs_created_at_idx ON forecast_runs(created_at);

        -- 2. forecast_results
        CREATE TABLE forecast_results (
            id SERIAL PRIMARY KEY,
            run_id INTEGER NOT NULL REFERENCES forecast_runs(id) ON DELETE CASCADE,
            result_type TEXT NOT NULL,
            entity_name TEXT NOT NULL,
            predicted_vote_share NUMERIC(7, 4),
            vote_share_lower NUMERIC(7, 4),
            vote_share_upper NUMERIC(7, 4),
            historical_trend JSONB,
            trend_direction TEXT,
            trend_strength NUMERIC(9, 4),
            confidence NUMERIC(5, 4),
            influence_factors JSONB,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        CREATE INDEX forecast_results_run_idx ON forecast_results(run_id);
        CREATE INDEX forecast_results_type_idx ON forecast_results(result_type);
        CREATE INDEX forecast_results_entity_idx ON forecast_results(entity_name);

        -- 3. forecast_swing_regions
        CREATE TABLE forecast_swing_regions (
            id SERIAL PRIMARY KEY,
            run_id INTEGER NOT NULL REFERENCES forecast_runs(id) ON DELETE CASCADE,
            region TEXT NOT NULL,
            region_name TEXT NOT NULL,
            position TEXT,
            margin_percent NUMERIC(5, 2),
            margin_votes INTEGER,
            volatility_score NUMERIC(9, 4),
            swing_magnitude NUMERIC(9, 2),
            leading_entity TEXT,
            challenging_entity TEXT,
            sentiment_balance TEXT DEFAULT '0',
            recent_trend_shift NUMERIC(9, 4),
            outcome_uncertainty NUMERIC(5, 4),
            key_factors JSONB,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        CREATE INDEX swing_regions_run_idx ON forecast_swing_regions(run_id);
        CREATE INDEX swing_regions_region_idx ON forecast_swing_regions(region);
        CREATE INDEX swing_regions_volatility_idx
        ON forecast_swing_regions(volatility_score);
    """)


def downgrade() -> None:
    """Rollback migration: drop forecast tables."""
    op.execute("""
        DROP TABLE IF EXISTS forecast_swing_regions CASCADE;
        DROP TABLE IF EXISTS forecast_results CASCADE;
        DROP TABLE IF EXISTS forecast_runs CASCADE;
    """)
