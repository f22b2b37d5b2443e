import json

from chronos.core.snapshot import SessionSnapshot


POLISH_TEMPLATE = """You are a senior education consultant. Rewrite the following informal classroom \
observation note as concise, professional written language using standard pedagogical terms. \
Remove filler words and focus on the key teaching behaviours and student responses.

Original note:
"{note}"

Professional record:"""


REPORT_TEMPLATE = """You are an expert teaching analyst specialising in classroom observation and \
feedback. Using the observation data below (JSON), write a professional, in-depth, structured \
observation report in Markdown.

**Observation data:**
```json
{data}
```

**Instructions:**
Follow this Markdown structure exactly, supporting each section with concrete figures from the \
data, analysis and actionable suggestions.

# Chronos AI Observation Report: {subject}

## 1. Overall teaching style
* **Teaching mode distribution:** which modes dominated and their share of the time.
* **Teaching style:** teacher-centred direct instruction, student-centred inquiry, or mixed.

## 2. Interaction and classroom management
* **Interaction frequency and type:** praise, corrections, open and closed questions.
* **Classroom climate:** active, tense or flat, based on the counts and notes.
* **Circulation and individual support:** what the circulation count says about attention to individuals.

## 3. Key moments and engagement trend
* **Engagement over time:** how the recorded engagement changed through the lesson.
* **Turning points:** mode switches or actions that coincided with a clear change in engagement.

## 4. Strengths and growth areas
* **Strengths:** 2-3 concrete strengths supported by the data.
* **Growth areas:** 2-3 specific, actionable professional development suggestions.

Begin the report now."""


def polish_prompt(note: str) -> str:
    return POLISH_TEMPLATE.format(note=note)


def report_prompt(snapshot: SessionSnapshot) -> str:
    data = json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2)
    return REPORT_TEMPLATE.format(data=data, subject=snapshot.subject)
