"""Race Course Planner - Lay out sailboat race courses on the water.

A geometry engine for race committees featuring:
- Geodetic and planar locations behind one interface
- Locus trees that position every mark relative to the start flag and wind
- A layout generator driven by five discrete course choices
- Wind-weighted course direction with bounded undo/redo over course state

Modules:
    core: Foundation classes (geo calculations, coordinates, points, regions)
    model: Data structures (Locus, Layout, Course, CourseState, stacks, roles)
    generators: Layout generation from LayoutSettings
    control: Course actions and the course direction state machine

Example:
    from racecourse_planner.core import Coordinate
    from racecourse_planner.model import Course, LocalCourseStack
    from racecourse_planner.generators import LayoutSettings
"""
