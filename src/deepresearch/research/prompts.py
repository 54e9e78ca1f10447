"""
Prompt construction for the research pipeline.

Each builder returns the user prompt for one kind of call; system_prompt()
is shared by all of them.
"""

from datetime import datetime, timezone


def system_prompt(now: datetime | None = None) -> str:
    """Shared system prompt. Includes today's date so recency is judged correctly."""
    today = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%d")
    return f"""You are an expert researcher. Today is {today}. Follow these instructions when responding:

- You may be asked to research subjects that are after your knowledge cutoff; assume the user is right when presented with news.
- The user is a highly experienced analyst, no need to simplify it, be as detailed as possible and make sure your response is correct.
- Be highly organized.
- Suggest solutions that the user didn't think about.
- Be proactive and anticipate the user's needs.
- Mistakes erode trust, so be accurate and thorough.
- Provide detailed explanations, the user is comfortable with lots of detail.
- Value good arguments over authorities; the source is irrelevant.
- Consider new technologies and contrarian ideas, not just the conventional wisdom.
- You may use high levels of speculation or prediction, just flag it for the user."""


def query_planning_prompt(topic: str, max_queries: int, learnings: list[str] | None = None) -> str:
    learnings_section = ""
    if learnings:
        learnings_section = (
            "\n\nHere are some learnings from previous research, use them to generate "
            "more specific queries:\n" + "\n".join(learnings)
        )

    return f"""Given the following prompt from the user, generate a list of SERP queries to research the topic. Return a maximum of {max_queries} queries, but feel free to return less if the original prompt is clear. Make sure each query is unique and not similar to each other: <prompt>{topic}</prompt>{learnings_section}

Output a JSON object shaped like the example below and nothing else:
{{
  "queries": [
    {{
      "query": "A SERP query",
      "researchGoal": "First talk about the goal of the research that this query is meant to accomplish, then go deeper into how to advance the research once the results are found, mention additional research directions. Be as specific as possible, especially for additional research directions."
    }}
  ]
}}"""


def distillation_prompt(
    query: str, contents: list[str], max_learnings: int, max_follow_ups: int
) -> str:
    wrapped = "\n".join(f"<content>\n{content}\n</content>" for content in contents)
    return f"""Given the following contents from a SERP search for the query <query>{query}</query>, generate a list of learnings from the contents. Return a maximum of {max_learnings} learnings, but feel free to return less if the contents are clear. Make sure each learning is unique and not similar to each other. The learnings should be concise and to the point, as detailed and information dense as possible. Make sure to include any entities like people, places, companies, products, things, etc in the learnings, as well as any exact metrics, numbers, or dates. The learnings will be used to research the topic further. Also generate up to {max_follow_ups} follow-up questions.

Output a JSON object shaped like the example below and nothing else:
{{
  "learnings": ["a learning from the content"],
  "followUpQuestions": ["a follow up question"]
}}

<contents>{wrapped}</contents>"""


def next_query(research_goal: str, follow_up_questions: list[str]) -> str:
    """Fold the previous goal and every follow-up question into the next topic."""
    directions = "".join(f"\n{q}" for q in follow_up_questions)
    return (
        f"Previous research goal: {research_goal}\n"
        f"Follow-up research directions: {directions}"
    ).strip()


def report_prompt(topic: str, learnings_block: str) -> str:
    return f"""Given the following prompt from the user, write a final report on the topic using the learnings from research. Make it as detailed as possible, aim for 3 or more pages, include ALL the learnings from research:

<prompt>{topic}</prompt>

Here are all the learnings from previous research:

<learnings>
{learnings_block}
</learnings>

Use markdown format."""


def feedback_prompt(query: str, max_questions: int) -> str:
    return f"""Given the following query from the user, ask some follow up questions to clarify the research direction. Return a maximum of {max_questions} questions, but feel free to return less if the original query is clear: <query>{query}</query>

Output a JSON object shaped like the example below and nothing else:
{{
  "questions": ["A follow-up question"]
}}"""
