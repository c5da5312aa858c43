#!/usr/bin/env python3
"""
Main entry point for the Worker Assignment Assistant
Demonstrates core functionality and provides example usage.
"""

from worker_assignment.intelligence.assistant import AssignmentAssistant
from worker_assignment.utils.helpers import setup_logging

DEMO_QUERIES = [
    "Who should work on Machine 1 for an urgent precision job?",
    "I need someone for a simple job on machine 3 this morning",
    "How is worker_a performing on Machine 2?",
    "Give me a system overview",
    "Can you improve the predictions with new feedback?",
    "Hello there",
]


def main():
    """Main application entry point."""
    logger = setup_logging("INFO")
    logger.info("Starting Worker Assignment Assistant demo")

    try:
        # Step 1: Seed with synthetic history
        assistant = AssignmentAssistant()
        count = assistant.load_sample_data()
        logger.info(f"Trained on {count} synthetic records")

        # Step 2: Direct prediction
        prediction = assistant.predict_worker(1, 4)
        logger.info(
            f"Direct prediction for Machine 1 / complexity 4: {prediction['recommended_worker']} "
            f"(~{prediction['estimated_time']:.1f} min, confidence {prediction['confidence']:.2f})"
        )

        # Step 3: Natural language requests
        for query in DEMO_QUERIES:
            response = assistant.process_query(query)
            logger.info(f"Q: {query}")
            logger.info(f"A: {response.get('natural_response', response.get('error'))}")

        # Step 4: New history is only used after a retrain
        assistant.add_training_data(
            [{"worker_id": "worker_f", "machine_id": 2, "time_minutes": 18, "quality_score": 97}],
            retrain=True,
        )
        logger.info(f"System status: {assistant.get_system_status()['status']}")
        logger.info(f"Learning status: {assistant.get_learning_status()}")

        for insight in assistant.generate_proactive_insights():
            logger.info(f"Insight [{insight['priority']}]: {insight['message']}")

        logger.info("Demo complete!")

    except Exception as e:
        logger.error(f"Application error: {e}")
        raise


if __name__ == "__main__":
    main()
