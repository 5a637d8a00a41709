STRONG_CV = """Jane Doe
Senior Frontend Engineer
jane.doe@example.com | +1 555 123 4567 | linkedin.com/in/janedoe

Summary
Senior frontend engineer with 8 years of experience building Angular and TypeScript products, focused on performance, accessibility and design systems.

Experience
Senior Frontend Engineer, Acme Corp
Jan 2020 - Present
- Led migration of 40 Angular modules to standalone components, reducing bundle size by 30%.
- Improved Core Web Vitals for 2M monthly users by introducing lazy loading and OnPush change detection.
- Built an NgRx state management layer with RxJS effects that cut API calls by 45%.
- Introduced unit testing with Jest and Cypress, raising coverage from 35% to 80% across 12 services.
- Automated CI/CD pipelines for 6 applications, reducing release time from 40 min to 12 min.
- Delivered WCAG 2.1 AA accessibility fixes across 120 components for enterprise customers.

Frontend Engineer, Beta GmbH
Mar 2016 - Dec 2019
- Developed SSR rendering for the marketing platform, increasing organic traffic by 25%.
- Mentored a team of 4 engineers and standardized code review practices.
- Optimized TypeScript build tooling, cutting local build time by 50%.
- Integrated monitoring and telemetry dashboards for 30 services.

Skills
Angular, TypeScript, RxJS, NgRx, Jest, Cypress, HTML, CSS

Education
BSc Computer Science, Example University, Sep 2012 - Jun 2016
"""

SHORT_CV = """Jane Doe
+1 555 123 4567
Frontend developer building Angular apps.
- Built dashboards with Angular and RxJS.
- Improved page load time by 20%.
Skills
Angular, TypeScript
"""

MIXED_DATES_CV = """Jane Doe
jane@example.com
Experience
Senior Engineer, Acme
Jan 2021 - Present
- Built dashboards for 3 teams.
Engineer, Beta
03/2019 - 12/2020
- Improved load time by 20%.
Intern, Gamma
2018
"""

CLEAN_BULLETS_CV = """Experience
- Built reporting dashboards for finance users.
- Improved onboarding flow for new customers.
- Delivered billing screens for the payments team.
- Migrated legacy forms to a new layout.
"""

MERGED_BULLETS_CV = """Experience
• Built reporting dashboards for finance users. • Improved onboarding flow for new customers. • Delivered billing screens for the payments team. • Migrated legacy forms to a new layout.
"""

NON_CV_TEXT = """Mix the flour and sugar in a large bowl.
Bake for twenty minutes until golden.
Serve warm with fresh cream and berries.
"""
