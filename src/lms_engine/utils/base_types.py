import typing

UserId = typing.NewType("UserId", str)
CourseId = typing.NewType("CourseId", str)
LessonId = typing.NewType("LessonId", str)
QuizId = typing.NewType("QuizId", str)
QuestionId = typing.NewType("QuestionId", str)
QuizResultId = typing.NewType("QuizResultId", str)
IsoTimestamp = typing.NewType("IsoTimestamp", str)
StorageKey = typing.NewType("StorageKey", str)
