from __future__ import annotations

import json

from langchain_core.prompts import PromptTemplate

PARAPHRASE_SCHEMA = json.dumps(
    {
        "question": [
            "Alternate Question 1",
            "Alternate Question 2",
            "Alternate Question 3",
            "Alternate Question 4",
        ]
    }
)

PARAPHRASE_PROMPT = PromptTemplate.from_template(
    """\
You are a helpful assistant that generates alternative queries
that could be asked to a large language model related to the user's original query.
Return the answer as JSON in the format {schema}

Generate at least 2 alternate queries and send ONLY JSON as per the schema.
Do not include any other text in your response.
Do not add additional information in your alternate queries.
Here is the question you need to generate alternate queries for:

{query}"""
)

REWRITE_SCHEMA = json.dumps({"question": "Rephrased Question"})
REWRITE_EXAMPLE = json.dumps({"question": "what is the reason for the blue color of the sky"})

REWRITE_PROMPT = PromptTemplate.from_template(
    """\
You are an expert at prompt engineering for LLMs.
Read the query below and rephrase it to be better suited for a large language model.
Do not include any other text in your response.
Do not add additional information to the query.
Return the answer as JSON in the format {schema}
For example: {example}

Here is the user's question (rephrase it and send ONLY JSON): {question}"""
)

SUMMARY_PROMPT = PromptTemplate.from_template("Summarize the following document:\n\n{content}")


def paraphrase_prompt(query: str) -> str:
    return PARAPHRASE_PROMPT.format(schema=PARAPHRASE_SCHEMA, query=query)


def rewrite_prompt(question: str) -> str:
    return REWRITE_PROMPT.format(schema=REWRITE_SCHEMA, example=REWRITE_EXAMPLE, question=question)


def summary_prompt(content: str) -> str:
    return SUMMARY_PROMPT.format(content=content)

