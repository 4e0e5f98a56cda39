"""FitCoach API: onboarding quiz, AI workout, meal and nutrition plans, progress tracking."""
