"""Topic queue for unattended daily generation."""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field


class QueuedTopic(BaseModel):
    topic: str
    keywords: list[str] = Field(default_factory=list)
    priority: int = 2  # 1 = highest


class CompletedTopic(QueuedTopic):
    blog_id: str
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


DEFAULT_TOPICS = [
    QueuedTopic(topic="How to Build a 6-Month Emergency Fund", keywords=["emergency fund", "savings", "financial security"], priority=1),
    QueuedTopic(topic="The Complete Guide to Index Fund Investing", keywords=["index funds", "investing", "passive income"], priority=1),
    QueuedTopic(topic="Understanding Your Credit Score: The Ultimate Guide", keywords=["credit score", "credit report", "FICO"], priority=2),
    QueuedTopic(topic="How to Pay Off $50,000 in Debt in 2 Years", keywords=["debt payoff", "debt snowball", "financial freedom"], priority=1),
    QueuedTopic(topic="The FIRE Movement: Retire Early in 10 Steps", keywords=["FIRE", "financial independence", "early retirement"], priority=2),
    QueuedTopic(topic="Tax Loss Harvesting: Save Thousands on Taxes", keywords=["tax loss harvesting", "taxes", "investing"], priority=3),
    QueuedTopic(topic="How to Negotiate a $10,000+ Salary Raise", keywords=["salary negotiation", "career", "income"], priority=2),
    QueuedTopic(topic="The 50/30/20 Budget Rule Explained with Examples", keywords=["budgeting", "50/30/20", "money management"], priority=1),
    QueuedTopic(topic="How to Save Your First $100,000", keywords=["savings goals", "wealth building", "first 100k"], priority=1),
    QueuedTopic(topic="Dollar-Cost Averaging vs Lump Sum: Which Wins?", keywords=["DCA", "lump sum", "investing strategy"], priority=1),
    QueuedTopic(topic="How to Build a 3-Fund Portfolio", keywords=["three fund portfolio", "simple investing", "Bogleheads"], priority=1),
    QueuedTopic(topic="REITs Explained: Real Estate Without the Headache", keywords=["REITs", "real estate investing", "dividends"], priority=2),
    QueuedTopic(topic="15 Side Hustles That Pay $1,000+ Per Month", keywords=["side hustle", "extra income", "freelancing"], priority=1),
    QueuedTopic(topic="Selling Digital Products: Passive Income Guide", keywords=["digital products", "passive income", "online courses"], priority=2),
]


class TopicQueue(BaseModel):
    """Pending topics plus a per-day generation counter, persisted as JSON."""

    last_generated: date | None = None
    generated_today: int = 0
    topics: list[QueuedTopic] = Field(default_factory=list)
    completed: list[CompletedTopic] = Field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> TopicQueue:
        """Load the queue, creating it with the default topics on first use."""
        if path.exists():
            return cls.model_validate_json(path.read_text())
        queue = cls(topics=[t.model_copy() for t in DEFAULT_TOPICS])
        queue.save(path)
        return queue

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))

    def should_generate(self, daily_limit: int, today: date | None = None) -> bool:
        today = today or date.today()
        if self.last_generated != today:
            self.last_generated = today
            self.generated_today = 0
        return self.generated_today < daily_limit and bool(self.topics)

    def select_next(self) -> QueuedTopic | None:
        if not self.topics:
            return None
        return min(self.topics, key=lambda t: t.priority)

    def mark_completed(self, topic: QueuedTopic, blog_id: str) -> None:
        self.topics = [t for t in self.topics if t.topic != topic.topic]
        self.completed.append(CompletedTopic(**topic.model_dump(), blog_id=blog_id))
        self.generated_today += 1
