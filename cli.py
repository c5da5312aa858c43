#!/usr/bin/env python3
"""
Command Line Interface for the Worker Assignment Assistant
Provides easy-to-use commands for common operations.
"""

import json
from pathlib import Path
from typing import Optional

import click

from worker_assignment.intelligence.assistant import AssignmentAssistant
from worker_assignment.utils.config import config
from worker_assignment.utils.exceptions import WorkerAssignmentError
from worker_assignment.utils.helpers import minutes_to_human_readable, setup_logging

DEFAULT_MODEL_PATH = str(Path(config.MODEL_DIR) / "worker_assignment_snapshot.joblib")


def build_assistant(data: Optional[str], records: Optional[int], model_path: Optional[str] = None) -> AssignmentAssistant:
    """Assistant trained from a CSV, a saved snapshot or synthetic history."""
    assistant = AssignmentAssistant()
    if model_path:
        assistant.core.load(model_path)
    elif data:
        assistant.load_training_csv(data)
    else:
        assistant.load_sample_data(n_records=records)
    return assistant


def data_options(func):
    func = click.option('--records', '-n', type=int, default=None,
                        help='Synthetic records to generate when no CSV is given')(func)
    func = click.option('--data', '-d', type=click.Path(exists=True, dir_okay=False),
                        help='CSV of historical records (worker_id, machine_id, time_minutes, quality_score)')(func)
    return func


def echo_error(error: WorkerAssignmentError):
    click.echo(f"❌ Error: {error.message}")
    if error.suggestion:
        click.echo(f"💡 {error.suggestion}")


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def cli(verbose):
    """Worker Assignment Assistant - Command Line Interface"""
    log_level = 'DEBUG' if verbose else config.LOG_LEVEL
    setup_logging(log_level)


@cli.command()
@click.argument('text')
@click.option('--context', '-c', default=None, help='JSON object merged over the derived context')
@click.option('--json-output', is_flag=True, help='Print the full response envelope as JSON')
@data_options
def query(text, context, json_output, data, records):
    """Ask a natural language question, e.g. "Who should work on Machine 1?"."""
    try:
        supplied = json.loads(context) if context else None
    except json.JSONDecodeError as e:
        click.echo(f"❌ Error: --context is not valid JSON ({e})")
        return

    try:
        assistant = build_assistant(data, records)
    except WorkerAssignmentError as e:
        echo_error(e)
        return

    response = assistant.process_query(text, supplied)

    if json_output:
        click.echo(json.dumps(response, indent=2, default=str))
        return

    if "error" in response:
        click.echo(f"❌ Error: {response['error']}")
        if response.get("suggestion"):
            click.echo(f"💡 {response['suggestion']}")
        return

    intent = response["understood_intent"]["primary"]
    click.echo(f"🧠 Intent: {intent['type']} ({intent['confidence']:.2f})")
    click.echo(f"💬 {response['natural_response']}")
    for suggestion in response["suggestions"]:
        click.echo(f"   • {suggestion}")


@cli.command()
@click.option('--machine', '-m', type=int, required=True, help='Machine id (1-5)')
@click.option('--complexity', '-x', type=int, default=3, help='Complexity level (1-5)')
@click.option('--model-path', type=click.Path(exists=True, dir_okay=False),
              help='Load a saved model snapshot instead of training')
@data_options
def predict(machine, complexity, model_path, data, records):
    """Recommend a worker for a machine and complexity level."""
    try:
        assistant = build_assistant(data, records, model_path)
        prediction = assistant.predict_worker(machine, complexity)
    except WorkerAssignmentError as e:
        echo_error(e)
        return

    click.echo(f"👷 Recommended worker: {prediction['recommended_worker']}")
    click.echo(f"⏱️ Estimated time: {minutes_to_human_readable(prediction['estimated_time'])}")
    click.echo(f"⭐ Average quality: {prediction['avg_quality']:.1f}%")
    click.echo(f"🎯 Confidence: {prediction['confidence'] * 100:.0f}%")
    click.echo(f"📊 Jobs on Machine {machine}: {prediction['job_count']}")


@cli.command()
@click.argument('worker_id')
@click.option('--machine', '-m', type=int, default=None, help='Add a machine-specific breakdown')
@data_options
def performance(worker_id, machine, data, records):
    """Show performance statistics for a worker."""
    try:
        assistant = build_assistant(data, records)
        stats = assistant.get_worker_performance(worker_id, machine)
    except WorkerAssignmentError as e:
        echo_error(e)
        return

    click.echo(f"👷 {stats['worker_id']}")
    click.echo(f"📋 Total jobs: {stats['total_jobs']}")
    click.echo(f"⏱️ Average time: {minutes_to_human_readable(stats['avg_time'])}")
    click.echo(f"⭐ Average quality: {stats['avg_quality']:.1f}%")
    click.echo(f"🏭 Machines: {', '.join(str(m) for m in stats['machines_operated'])}")

    specialization = stats.get("machine_specialization")
    if specialization:
        click.echo(f"🔧 Machine {specialization['machine_id']}: {specialization['jobs']} jobs")


@cli.command()
@click.option('--save-model', is_flag=True, help='Save the trained snapshot')
@click.option('--output', '-o', default=DEFAULT_MODEL_PATH, help='Snapshot path used with --save-model')
@data_options
def train(save_model, output, data, records):
    """Train the nearest-neighbour model."""
    source = data or "synthetic history"
    click.echo(f"🎯 Training on {source}...")

    try:
        assistant = build_assistant(data, records)
    except WorkerAssignmentError as e:
        echo_error(e)
        return

    model = assistant.core.status()
    click.echo(f"✅ {model['algorithm']} trained on {model['trained_records']:,} records")
    click.echo(f"👷 Workers: {', '.join(model['workers'])}")

    if save_model:
        assistant.core.save(output)
        click.echo(f"💾 Model saved to {output}")


@cli.command()
@data_options
def status(data, records):
    """Show system and learning status."""
    try:
        assistant = build_assistant(data, records)
    except WorkerAssignmentError as e:
        echo_error(e)
        return

    system = assistant.get_system_status()
    click.echo(f"🏭 System: {system['status']}")
    click.echo(f"📊 Records: {system['data']['records']:,} ({system['data']['workers']} workers)")
    click.echo(f"🤖 Model: {system['model']['status']} ({system['model']['algorithm']})")

    for insight in assistant.generate_proactive_insights():
        click.echo(f"💡 [{insight['priority']}] {insight['message']}")


if __name__ == '__main__':
    cli()
