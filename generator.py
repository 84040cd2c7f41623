import logging

import requests
from flask import current_app

from errors import UpstreamError

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = 'Error generating job description'


def build_prompt(job_title, skills):
    if isinstance(skills, (list, tuple)):
        skills = ', '.join(str(skill) for skill in skills)
    return f'Create a job description for a {job_title} with skills: {skills}'


def _generated_text(payload):
    # the hosted API answers with a list of candidates; some models return one object
    if isinstance(payload, list) and payload:
        payload = payload[0]
    if isinstance(payload, dict) and isinstance(payload.get('generated_text'), str):
        return payload['generated_text'].strip()
    raise ValueError(f'unexpected inference payload: {payload!r}')


def generate_description(job_title, skills):
    config = current_app.config
    headers = {
        'Authorization': f"Bearer {config['INFERENCE_API_KEY']}",
        'Content-Type': 'application/json',
    }
    body = {
        'inputs': build_prompt(job_title, skills),
        'options': {'wait_for_model': True},
    }

    try:
        response = requests.post(
            config['INFERENCE_API_URL'],
            json=body,
            headers=headers,
            timeout=config['INFERENCE_TIMEOUT'],
        )
        response.raise_for_status()
        return _generated_text(response.json())
    except (requests.RequestException, ValueError) as exc:
        logger.error('%s: %s', FAILURE_MESSAGE, exc)
        raise UpstreamError(FAILURE_MESSAGE) from exc
