# Sample course records used to seed the in-memory repository
SAMPLE_COURSES = [
    {
        "id": "1",
        "title": "Introduction to Machine Learning",
        "description": "Learn the fundamentals of machine learning algorithms and applications.",
        "created_at": "2024-03-15",
        "lessons": [
            {
                "id": "l1",
                "title": "What is Machine Learning?",
                "content": (
                    "Machine learning is a branch of artificial intelligence (AI) and computer science "
                    "which focuses on the use of data and algorithms to imitate the way that humans "
                    "learn, gradually improving its accuracy."
                ),
                "completed": True,
            },
            {
                "id": "l2",
                "title": "Supervised vs. Unsupervised Learning",
                "content": (
                    "Supervised learning uses labeled datasets to train algorithms to classify data or "
                    "predict outcomes, while unsupervised learning uses unlabeled data to identify "
                    "patterns and relationships."
                ),
                "completed": True,
            },
            {
                "id": "l3",
                "title": "Linear Regression",
                "content": (
                    "Linear regression is a statistical method used to model the relationship between a "
                    "dependent variable and one or more independent variables by fitting a linear "
                    "equation to the observed data."
                ),
                "completed": False,
            },
            {
                "id": "l4",
                "title": "Decision Trees",
                "content": (
                    "Decision trees are a non-parametric supervised learning method used for "
                    "classification and regression tasks, where the goal is to create a model that "
                    "predicts the value of a target variable by learning simple decision rules "
                    "inferred from the data features."
                ),
                "completed": False,
            },
        ],
        "quizzes": [
            {
                "id": "q1",
                "title": "Machine Learning Basics",
                "questions": [
                    {
                        "id": "q1-1",
                        "question": "What is the primary goal of supervised learning?",
                        "options": [
                            "Finding hidden patterns in unlabeled data",
                            "Predicting outcomes based on labeled data",
                            "Clustering similar data points together",
                            "Reducing the dimensionality of data",
                        ],
                        "correct_answer": 1,
                    },
                    {
                        "id": "q1-2",
                        "question": "Which of the following is NOT a type of machine learning?",
                        "options": [
                            "Supervised learning",
                            "Unsupervised learning",
                            "Reinforcement learning",
                            "Deterministic learning",
                        ],
                        "correct_answer": 3,
                    },
                ],
                "completed": False,
            },
        ],
    },
]
