from pydantic import BaseModel, ConfigDict, Field

class RankingRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str | None
    last_name: str | None = Field(alias="lastName")
    email: str
    total_points: int
    matches: int
    wins: int
    win_rate: float | None  # percentage 0..100, 2 decimals; None without matches

class RankingOut(BaseModel):
    rows: list[RankingRow]
    limit: int
    offset: int

class LeaderOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str | None
    last_name: str | None = Field(alias="lastName")
    email: str
    total_points: int

class DashboardStatsOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_players: int = Field(alias="totalPlayers")
    leader: LeaderOut | None
    average_points: int = Field(alias="averagePoints")
